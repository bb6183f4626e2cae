"""Storefront catalog API.

Product catalog queries, product mutations, product photos and
Braintree-backed checkout for an e-commerce storefront.
"""
