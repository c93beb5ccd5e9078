"""
Top-level package for the WordPress → markdown conversion utility.

This package bundles all components required to turn a WordPress WXR
export into markdown posts for a static site: extracting posts, images and
galleries, converting HTML to markdown, resolving the references between
them, writing the result and downloading the images.  Modules are split
into subpackages:

* :mod:`wp2md.extractors` – export reading and record extraction
* :mod:`wp2md.parsers` – HTML to markdown conversion
* :mod:`wp2md.resolvers` – image and gallery cross-referencing
* :mod:`wp2md.writers` – markdown files and image downloads
* :mod:`wp2md.utils` – error reporting, URLs, downloads, config checks

Orchestration is handled in :mod:`wp2md.conversion_tool`.
"""
