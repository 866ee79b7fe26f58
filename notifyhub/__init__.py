"""Client-resident notification core: fetch, refresh, optimistic mutations and ranked views."""

__version__ = "0.1.0"
