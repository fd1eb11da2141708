# dimerr/__init__.py
"""
Seller management backend.

    uvicorn dimerr.main:app --reload
"""
