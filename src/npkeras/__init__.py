"""
npkeras: a Keras-style backend whose primitives are executed by NumPy.

The package is split into a `domain` layer (errors, enums, structural
protocols) and an `infrastructure` layer (configuration, graphs and sessions,
tensors and variables, NumPy-forwarding ops and the backend facade).

Typical use::

    from npkeras.infrastructure.backend import backend as K

    x = K.placeholder(shape=(None, 3))
    y = K.softmax(x)
"""

__version__ = "0.1.0a0"
