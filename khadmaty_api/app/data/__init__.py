"""
Static reference data: service categories and Algerian wilayas.
"""
