"""Request construction utilities for the mobile client networking layer."""
