"""User accounts and authentication service"""
