"""
Shared code for the Codivio backend services
"""
