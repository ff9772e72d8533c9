"""
Lease backend project package
Hosts the Django settings for the lease template engine
"""
