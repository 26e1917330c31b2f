"""Admin domain - Moderation, users, categories and platform settings"""
