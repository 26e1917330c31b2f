"""Payments domain - PayFast checkout and notification handling"""
