"""Pytest configuration for lightpath tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_scene_storage():
    """Clear stored objects and material registries around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the fields are declared after Taichi is initialized
    from lightpath.scene.storage import clear_materials, clear_scene

    clear_scene()
    clear_materials()

    yield

    clear_scene()
    clear_materials()
