"""Projects and project membership service"""
