"""Tests for rtalias.runtime.grouping — per-family minimality and resolution."""

from __future__ import annotations

import dataclasses

from engine_samples import (
    LLAMA_MAC_METAL,
    LLAMA_WIN_CPU,
    LLAMA_WIN_CUDA,
    LLAMA_WIN_CUDA_OLDER,
    LLAMA_WIN_ROCM,
    MLX_MAC,
)
from rtalias.runtime import AliasField, AliasGroup, has_variation
from rtalias.runtime.generator import get_generator

F = AliasField


def _by_name(entries):
    return {entry.engine.name: entry for entry in entries}


class TestHasVariation:
    def test_identical_up_to_case(self) -> None:
        assert has_variation(["CUDA", "cuda", "Cuda"]) is False

    def test_extension_order_ignored(self) -> None:
        assert has_variation([("AVX", "AVX2"), ("AVX2", "AVX")]) is False

    def test_missing_vs_present(self) -> None:
        assert has_variation([None, "CUDA"]) is True

    def test_all_missing(self) -> None:
        assert has_variation([None, None]) is False

    def test_different_values(self) -> None:
        assert has_variation(["win", "mac"]) is True


class TestCreateGroups:
    def test_partitions_by_family(self) -> None:
        groups = AliasGroup.create_groups([MLX_MAC, LLAMA_WIN_CUDA, LLAMA_WIN_CPU])
        assert [g.family for g in groups] == ["mlx-llm", "llama.cpp"]
        assert groups[1].engines == [LLAMA_WIN_CUDA, LLAMA_WIN_CPU]

    def test_empty_input(self) -> None:
        assert AliasGroup.create_groups([]) == []


class TestMinimumComponents:
    def test_singleton_is_version_only(self) -> None:
        group = AliasGroup.create_groups([MLX_MAC])[0]
        assert group.minimum_components == frozenset({F.VERSION})

    def test_empty_group_is_version_only(self) -> None:
        group = AliasGroup("llama.cpp", [], get_generator("llama.cpp"))
        assert group.minimum_components == frozenset({F.VERSION})

    def test_gpu_variation(self, windows_llama_engines) -> None:
        group = AliasGroup.create_groups(windows_llama_engines)[0]
        assert group.minimum_components == frozenset({F.GPU_FRAMEWORK, F.VERSION})

    def test_platform_variation(self) -> None:
        group = AliasGroup.create_groups([LLAMA_WIN_CUDA, LLAMA_MAC_METAL])[0]
        assert group.minimum_components == frozenset(
            {
                F.PLATFORM,
                F.CPU_ARCHITECTURE,
                F.GPU_FRAMEWORK,
                F.CPU_INSTRUCTION_SET_EXTENSIONS,
                F.VERSION,
            }
        )

    def test_case_only_difference_is_not_variation(self) -> None:
        shouty = dataclasses.replace(
            LLAMA_WIN_CPU, name="llama.cpp-WIN", platform="WIN", version="1.50.3"
        )
        group = AliasGroup.create_groups([LLAMA_WIN_CPU, shouty])[0]
        assert group.minimum_components == frozenset({F.VERSION})


class TestMinimalAliases:
    def test_single_mlx_engine(self) -> None:
        group = AliasGroup.create_groups([MLX_MAC])[0]
        [entry] = group.get_engines_with_minimal_aliases()
        assert entry.engine is MLX_MAC
        assert entry.minimal_alias == "mlx-engine@0.26.1"
        assert entry.full_alias == "mlx-llm-mac-arm64-apple-metal-advsimd-0.26.1"

    def test_windows_gpu_variants(self, windows_llama_engines) -> None:
        group = AliasGroup.create_groups(windows_llama_engines)[0]
        entries = _by_name(group.get_engines_with_minimal_aliases())

        cuda = entries[LLAMA_WIN_CUDA.name]
        assert cuda.minimal_alias == "llama.cpp-cuda@1.50.2"
        assert cuda.full_alias == "llama.cpp-win-x86_64-nvidia-cuda-avx2-1.50.2"
        assert entries[LLAMA_WIN_CPU.name].minimal_alias == "llama.cpp-cpu@1.50.2"
        assert entries[LLAMA_WIN_ROCM.name].minimal_alias == "llama.cpp-rocm@1.50.2"

    def test_windows_and_mac(self) -> None:
        group = AliasGroup.create_groups([LLAMA_WIN_CUDA, LLAMA_MAC_METAL])[0]
        entries = _by_name(group.get_engines_with_minimal_aliases())
        assert (
            entries[LLAMA_WIN_CUDA.name].minimal_alias
            == "llama.cpp-win-x86_64-cuda-avx2@1.50.2"
        )
        assert (
            entries[LLAMA_MAC_METAL.name].minimal_alias
            == "llama.cpp-mac-arm64-metal-advsimd@1.50.2"
        )

    def test_falls_back_to_full_alias(self) -> None:
        """Varying extensions on an engine without any falls back to the full alias."""
        bare = dataclasses.replace(
            LLAMA_WIN_CPU, name="llama.cpp-win-x86_64", cpu_instruction_set_extensions=()
        )
        group = AliasGroup.create_groups([LLAMA_WIN_CPU, bare])[0]
        entries = _by_name(group.get_engines_with_minimal_aliases())
        assert entries[bare.name].minimal_alias == "llama.cpp-win-x86_64-1.50.2"
        assert entries[LLAMA_WIN_CPU.name].minimal_alias == (
            "llama.cpp-win-x86_64-cpu-avx2@1.50.2"
        )

    def test_selected_alias_is_minimal(self, windows_llama_engines) -> None:
        group = AliasGroup.create_groups(
            windows_llama_engines + [LLAMA_WIN_CUDA_OLDER, LLAMA_MAC_METAL]
        )[0]
        for engine in group.engines:
            candidates = group.generate_aliases_for_engine(engine)
            chosen = group.select_minimal_alias(candidates)
            assert chosen is not None
            assert group.minimum_components <= chosen.fields
            assert not any(
                group.minimum_components <= c.fields
                and len(c.fields) < len(chosen.fields)
                for c in candidates
            )


class TestResolve:
    def _group(self) -> AliasGroup:
        return AliasGroup.create_groups(
            [LLAMA_WIN_CUDA, LLAMA_WIN_CUDA_OLDER, LLAMA_WIN_CPU]
        )[0]

    def test_unknown_alias(self) -> None:
        assert self._group().resolve("non-existent-alias@1.0.0") == []

    def test_versioned_alias_single_match(self) -> None:
        [match] = self._group().resolve("llama.cpp-cuda@1.50.2")
        assert match.engine is LLAMA_WIN_CUDA
        assert match.matched_alias.alias == "llama.cpp-cuda@1.50.2"
        assert match.matched_alias.fields == frozenset(
            {F.FAMILY, F.GPU_FRAMEWORK, F.VERSION}
        )

    def test_unversioned_alias_shared(self) -> None:
        matches = self._group().resolve("llama.cpp-cuda")
        assert [m.engine for m in matches] == [LLAMA_WIN_CUDA, LLAMA_WIN_CUDA_OLDER]
        for match in matches:
            assert match.matched_alias.fields == frozenset({F.FAMILY, F.GPU_FRAMEWORK})

    def test_full_alias(self) -> None:
        [match] = self._group().resolve("llama.cpp-win-x86_64-nvidia-cuda-avx2-1.50.2")
        assert match.engine is LLAMA_WIN_CUDA
        assert match.matched_alias.fields == frozenset({F.VERSION})

    def test_every_generated_alias_resolves_to_its_engine(self) -> None:
        group = self._group()
        for engine in group.engines:
            for alias in group.generate_aliases_for_engine(engine):
                assert engine in [m.engine for m in group.resolve(alias.alias)]
