"""Lease template composition: clause library, template composer and lease generator."""
