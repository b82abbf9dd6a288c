"""Reproducibility utilities for deterministic simulations."""

import numpy as np
from typing import Optional


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the generator every random draw in the package goes through.
    
    Args:
        seed: Random seed (None draws fresh OS entropy)
        
    Returns:
        NumPy Generator
    """
    return np.random.default_rng(seed)
