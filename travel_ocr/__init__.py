"""Travel Document OCR Service.

Batch extraction pipeline for passports, flight tickets, and hotel
bookings: groups uploaded documents per traveler, extracts structured
fields, maps tickets to travelers, and streams progress and results.
"""
