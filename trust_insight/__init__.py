"""
Trust insight engine.

Annotates an outgoing wallet transaction with reputation signals about the
destination address and the requesting origin: stake distribution and trust
level from community staking data, personalized against the accounts the
user already trusts.
"""
