"""
Services module - business logic on top of MongoDB and the AI client.
"""
