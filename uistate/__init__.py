"""Stateless UI-state encoding and dispatch.

Application state is serialized into the `custom_id` of a UI component, packed
into printable text, and decoded again when the platform hands the string back.
"""
