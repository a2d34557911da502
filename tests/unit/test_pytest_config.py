"""Checks that the build system tests are collected by a plain `pytest` run."""

from pathlib import Path


def test_build_directory_is_collected(pytestconfig):
    assert "build" not in pytestconfig.getini("norecursedirs")


def test_build_tests_exist(pytestconfig):
    build_tests = Path(str(pytestconfig.rootpath)) / "tests" / "unit" / "build"

    assert sorted(build_tests.glob("test_*.py"))
