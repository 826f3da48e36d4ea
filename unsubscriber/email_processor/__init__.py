"""
Email processing module for parsing messages and resolving unsubscribe links.
"""
