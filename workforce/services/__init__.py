"""
Business logic shared by the routers and maintenance commands.
"""
