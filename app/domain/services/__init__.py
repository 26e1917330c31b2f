"""Services domain - Bookable services offered by businesses"""
