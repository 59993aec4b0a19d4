"""
Codivio backend microservices
"""
