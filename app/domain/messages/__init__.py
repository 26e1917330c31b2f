"""Messages domain - Direct messages between users"""
