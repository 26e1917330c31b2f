"""Reviews domain - Ratings, comments and content reports"""
