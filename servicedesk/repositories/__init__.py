"""
Persistence adapters.

json_storage owns the two JSON documents (users and app data). Services go
through it instead of touching the files, and mutate documents only inside
``update()`` so each read-modify-write cycle is serialized.
"""
