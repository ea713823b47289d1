"""ScamShield: community scam reporting and scam-likelihood analysis.

This package contains the analysis engine that classifies user input as a
phone number, URL, or free text and checks it against previously submitted
reports, along with the report repository adapters and the HTTP surface.
"""
