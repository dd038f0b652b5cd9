"""
Models for curve fitting.

This module provides the standard fit models (linear, polynomial,
exponential) and utilities for registering custom ones.
"""

from .base import ModelSpec
from .linear import linear, linear_model
from .polynomial import quadratic_model, cubic_model, polynomial_model
from .exponential import sum_of_exponentials, exponential_model


# Model registry - maps model names to factories returning a ModelSpec
MODEL_REGISTRY = {
    'linear': linear_model,
    'quadratic': quadratic_model,
    'cubic': cubic_model,
    'polynomial': polynomial_model,
    'exponential': exponential_model,
}


def get_model(name, **kwargs):
    """
    Build a model by name.

    Parameters
    ----------
    name : str
        Model name (e.g., 'linear', 'polynomial', 'exponential')
    **kwargs
        Passed to the model factory (``n`` for 'polynomial' and
        'exponential')

    Returns
    -------
    ModelSpec
        Model specification

    Raises
    ------
    KeyError
        If model name not found in registry
    """
    if name not in MODEL_REGISTRY:
        raise KeyError(f"Model '{name}' not found. Available: {list_models()}")
    return MODEL_REGISTRY[name](**kwargs)


def list_models():
    """
    List all available model names.

    Returns
    -------
    list
        List of available model names
    """
    return list(MODEL_REGISTRY.keys())


def register_model(name, factory):
    """
    Register a custom model.

    Parameters
    ----------
    name : str
        Model name
    factory : callable
        Function returning a ModelSpec
    """
    MODEL_REGISTRY[name] = factory


__all__ = [
    'ModelSpec',
    'linear',
    'linear_model',
    'quadratic_model',
    'cubic_model',
    'polynomial_model',
    'sum_of_exponentials',
    'exponential_model',
    'get_model',
    'list_models',
    'register_model',
    'MODEL_REGISTRY',
]
