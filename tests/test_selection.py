"""Tests for rtalias.runtime.selection — select and remove plans."""

from __future__ import annotations

import dataclasses

import pytest

from engine_samples import (
    LLAMA_WIN_CPU,
    LLAMA_WIN_CUDA,
    LLAMA_WIN_CUDA_PREV,
    MLX_MAC,
)
from rtalias.runtime import (
    AliasField,
    AmbiguousAliasError,
    SelectionChange,
    UserInputError,
    VersionedLatestAliasError,
    plan_remove,
    plan_select,
    plan_select_latest,
    reject_versioned_latest,
)
from rtalias.runtime.selection import require_alias_or_latest, specifier_has_version

ENGINES = [LLAMA_WIN_CUDA_PREV, LLAMA_WIN_CUDA, LLAMA_WIN_CPU, MLX_MAC]


class TestPlanSelect:
    def test_select_unique_alias(self) -> None:
        changes = plan_select(ENGINES, {}, "llama.cpp-cuda@1.50.2")
        assert changes == [
            SelectionChange(engine=LLAMA_WIN_CUDA.specifier, model_format="GGUF")
        ]
        assert changes[0].full_alias == "llama.cpp-win-x86_64-nvidia-cuda-avx2-1.50.2"

    def test_already_selected(self) -> None:
        selections = {"GGUF": LLAMA_WIN_CUDA.specifier}
        [change] = plan_select(ENGINES, selections, "llama.cpp-cuda@1.50.2")
        assert change.already_selected is True
        assert change.previous_version == "1.50.2"

    def test_replaces_other_version(self) -> None:
        selections = {"GGUF": LLAMA_WIN_CUDA_PREV.specifier}
        [change] = plan_select(ENGINES, selections, "llama.cpp-cuda@1.50.2")
        assert change.already_selected is False
        assert change.previous_version == "1.49.0"

    def test_unversioned_alias_is_ambiguous(self) -> None:
        with pytest.raises(AmbiguousAliasError):
            plan_select(ENGINES, {}, "llama.cpp-cuda")

    def test_latest_picks_newest(self) -> None:
        [change] = plan_select(ENGINES, {}, "llama.cpp-cuda", latest=True)
        assert change.engine == LLAMA_WIN_CUDA.specifier

    def test_latest_rejects_versioned_alias(self) -> None:
        with pytest.raises(VersionedLatestAliasError):
            plan_select(ENGINES, {}, "llama.cpp-cuda@1.49.0", latest=True)

    def test_latest_rejects_full_alias(self) -> None:
        with pytest.raises(VersionedLatestAliasError):
            plan_select(
                ENGINES, {}, "llama.cpp-win-x86_64-avx2-1.50.2", latest=True
            )

    def test_reject_versioned_latest(self) -> None:
        reject_versioned_latest("llama.cpp-cuda", frozenset({AliasField.FAMILY}))
        with pytest.raises(VersionedLatestAliasError, match="llama.cpp-cuda@1.49.0"):
            reject_versioned_latest(
                "llama.cpp-cuda@1.49.0",
                frozenset({AliasField.FAMILY, AliasField.VERSION}),
            )

    def test_defaults_to_every_supported_format(self) -> None:
        multi = dataclasses.replace(
            MLX_MAC, supported_model_formats=("MLX", "SAFETENSORS")
        )
        changes = plan_select([multi], {}, "mlx-engine")
        assert [c.model_format for c in changes] == ["MLX", "SAFETENSORS"]

    def test_restricted_to_requested_formats(self) -> None:
        multi = dataclasses.replace(
            MLX_MAC, supported_model_formats=("MLX", "SAFETENSORS")
        )
        changes = plan_select([multi], {}, "mlx-engine", model_formats={"SAFETENSORS"})
        assert [c.model_format for c in changes] == ["SAFETENSORS"]


class TestPlanSelectLatest:
    def test_moves_to_newest_version(self) -> None:
        selections = {"GGUF": LLAMA_WIN_CUDA_PREV.specifier, "MLX": MLX_MAC.specifier}
        changes = plan_select_latest(ENGINES, selections)
        assert changes == [
            SelectionChange(
                engine=LLAMA_WIN_CUDA.specifier,
                model_format="GGUF",
                already_selected=False,
                previous_version="1.49.0",
            ),
            SelectionChange(
                engine=MLX_MAC.specifier,
                model_format="MLX",
                already_selected=True,
                previous_version="0.26.1",
            ),
        ]

    def test_format_filter(self) -> None:
        selections = {"GGUF": LLAMA_WIN_CUDA_PREV.specifier, "MLX": MLX_MAC.specifier}
        changes = plan_select_latest(ENGINES, selections, {"MLX"})
        assert [c.model_format for c in changes] == ["MLX"]

    def test_uninstalled_selection_skipped(self) -> None:
        selections = {"GGUF": LLAMA_WIN_CUDA.specifier}
        assert plan_select_latest([MLX_MAC], selections) == []


class TestPlanRemove:
    def test_name_matches_all_versions(self) -> None:
        assert plan_remove(ENGINES, LLAMA_WIN_CUDA.name) == [
            LLAMA_WIN_CUDA_PREV,
            LLAMA_WIN_CUDA,
        ]

    def test_name_at_version(self) -> None:
        assert plan_remove(ENGINES, f"{LLAMA_WIN_CUDA.name}@1.49.0") == [
            LLAMA_WIN_CUDA_PREV
        ]

    def test_no_match(self) -> None:
        assert plan_remove(ENGINES, "llama.cpp-cuda") == []

    def test_specifier_has_version(self) -> None:
        assert specifier_has_version("x@1.0.0") is True
        assert specifier_has_version("x") is False


def test_alias_or_latest_required() -> None:
    with pytest.raises(UserInputError, match="at least one"):
        require_alias_or_latest(None, False)
    require_alias_or_latest(None, True)
