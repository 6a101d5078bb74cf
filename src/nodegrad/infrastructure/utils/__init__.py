"""
Sampling distributions and weight initializers.

Notes
-----
This package is imported by the tensor module (for the default sampling
distribution), so it must not import the tensor or matrix packages itself.
Import `weight_initializer` explicitly where it is needed.
"""
