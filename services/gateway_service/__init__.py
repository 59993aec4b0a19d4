"""Single ingress: token verification and request routing"""
