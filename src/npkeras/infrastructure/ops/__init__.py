from . import array_ops, image_ops, math_ops, nn_ops

__all__ = ["array_ops", "image_ops", "math_ops", "nn_ops"]
