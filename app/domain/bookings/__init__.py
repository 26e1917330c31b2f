"""Bookings domain - Appointment lifecycle and slot conflicts"""
