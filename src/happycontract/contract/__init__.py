"""
Contract access: wrapper, method facades, dispatch policy and the
named-instance registry.
"""
