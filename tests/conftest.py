"""Pytest fixtures for starlog tests."""

import shutil
import tempfile

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

# Add src directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from starlog.config import LogConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp = tempfile.mkdtemp()
    yield temp
    shutil.rmtree(temp, ignore_errors=True)


@pytest.fixture
def log_config(temp_dir):
    """Create a configuration writing into the temporary directory."""
    return LogConfig(folder=str(Path(temp_dir) / "logs"), version="1.0")


@pytest.fixture
def results_table():
    """Create a small results table with float metrics."""
    return pd.DataFrame({
        "model": ["xgb", "lr", "rf"],
        "auc": [0.789, 0.71234567, 0.75],
        "features": [42, 42, 30],
    })


@pytest.fixture
def figure():
    """Create a simple line plot, closed after the test."""
    fig, ax = plt.subplots(figsize=(3, 2))
    ax.plot(np.arange(10), np.arange(10) ** 2)
    ax.set_title("loss")
    yield fig
    plt.close(fig)


@pytest.fixture
def second_figure():
    """Create a second plot for multi-plot calls."""
    fig, ax = plt.subplots(figsize=(3, 2))
    ax.bar(["a", "b"], [1, 2])
    yield fig
    plt.close(fig)
