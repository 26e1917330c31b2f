"""Businesses domain - Directory listings, working hours and availability"""
