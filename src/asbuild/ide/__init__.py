"""IDE integration for asbuild projects."""

from .module_descriptor import ModuleDescriptorEmitter

__all__ = ["ModuleDescriptorEmitter"]
