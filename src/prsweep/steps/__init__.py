"""Pipeline steps: fetch, filter, resolve, decide, confirm, mutate."""
