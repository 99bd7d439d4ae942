from __future__ import annotations

import pytest

from engine_samples import (
    LLAMA_WIN_CPU,
    LLAMA_WIN_CUDA,
    LLAMA_WIN_CUDA_OLDER,
    LLAMA_WIN_ROCM,
    MLX_MAC,
)
from rtalias.runtime import EngineDescriptor


@pytest.fixture
def windows_llama_engines() -> list[EngineDescriptor]:
    return [LLAMA_WIN_CUDA, LLAMA_WIN_CPU, LLAMA_WIN_ROCM]


@pytest.fixture
def mixed_engines() -> list[EngineDescriptor]:
    return [MLX_MAC, LLAMA_WIN_CUDA, LLAMA_WIN_CUDA_OLDER, LLAMA_WIN_CPU]
