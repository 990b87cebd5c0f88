"""Descriptor assembly, configuration merge and template rendering."""

from .assembler import FRAMEWORK_NAME_KEY, DescriptorAssembler
from .definition import DOCUMENTS, PackageDefinition
from .installer import Installer, RenderedPackage
from .request import PackageRequest
from .schema import ConfigSchemaNode, parse_config_schema
from .templating import render_template

__all__ = [
    "ConfigSchemaNode",
    "DescriptorAssembler",
    "DOCUMENTS",
    "FRAMEWORK_NAME_KEY",
    "Installer",
    "PackageDefinition",
    "PackageRequest",
    "RenderedPackage",
    "parse_config_schema",
    "render_template",
]
