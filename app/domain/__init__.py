"""
Domain dataclasses shared by the ad-performance import and reporting flows.
"""
