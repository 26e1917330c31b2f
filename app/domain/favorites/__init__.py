"""Favorites domain - Businesses a customer has saved"""
