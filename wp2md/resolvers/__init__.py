"""
Resolution of references between posts, images and galleries.
"""

from .cross_reference import merge_galleries_into_posts, merge_images_into_posts

__all__ = ["merge_galleries_into_posts", "merge_images_into_posts"]
