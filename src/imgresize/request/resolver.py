"""Request resolution — request paths to validated RequestDescriptors.

Path shape::

    /{bucket_alias}/{assortment}/{object/key/segments...}/{size_name}.{extension}

The object key may span several segments because the object store's key
namespace is itself ``/``-delimited. The last segment is always split at its
last ``.``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from imgresize.errors.exceptions import BadRequestError, InvalidSizeSpecError
from imgresize.resize.sizes import parse_size
from imgresize.types import SUPPORTED_EXTENSIONS, Catalog, RequestDescriptor

logger = logging.getLogger(__name__)

_MIN_SEGMENTS = 4


class RequestResolver:
    """Resolves request paths against an immutable catalog snapshot. No I/O."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def resolve(self, path: str) -> RequestDescriptor:
        """Resolve a raw request path such as ``/images/avatar/user/42/large.jpg``."""
        return self.resolve_segments(path.strip("/").split("/"))

    def resolve_segments(self, segments: Sequence[str]) -> RequestDescriptor:
        """Resolve pre-split path segments, short-circuiting on the first failure.

        Order: path shape, bucket alias, assortment, size name, size spec,
        extension.
        """
        if len(segments) < _MIN_SEGMENTS:
            raise BadRequestError("Invalid URL format", error_type="malformed_path")

        bucket_alias = segments[0]
        assortment = segments[1]
        # Empty segments inside the key are kept: "a//b" is a valid object name.
        object_key = "/".join(segments[2:-1])
        if not bucket_alias or not assortment or not object_key.strip("/"):
            raise BadRequestError("Invalid URL format", error_type="malformed_path")

        size_name, dot, extension = segments[-1].rpartition(".")
        if not dot or not size_name or not extension:
            raise BadRequestError("Invalid file format", error_type="malformed_path")

        resolved_bucket = self._catalog.buckets.get(bucket_alias)
        if resolved_bucket is None:
            raise BadRequestError(
                f"Invalid bucket alias: {bucket_alias}", error_type="unknown_bucket_alias"
            )

        sizes = self._catalog.assortments.get(assortment)
        if sizes is None:
            raise BadRequestError(
                f"Unknown assortment: {assortment}", error_type="unknown_assortment"
            )

        size_spec = sizes.get(size_name)
        if size_spec is None:
            raise BadRequestError(f"Unknown size: {size_name}", error_type="unknown_size_name")

        try:
            dimension = parse_size(size_spec)
        except InvalidSizeSpecError as e:
            logger.warning(
                "Catalog size %s/%s has an invalid spec %r", assortment, size_name, size_spec
            )
            raise BadRequestError(
                f"Invalid size format: {e.message}", error_type="invalid_size_spec"
            ) from e

        if extension.lower() not in SUPPORTED_EXTENSIONS:
            raise BadRequestError(
                f"Unsupported image format: {extension} "
                f"(expected one of {', '.join(sorted(SUPPORTED_EXTENSIONS))})",
                error_type="unsupported_extension",
            )

        return RequestDescriptor(
            bucket_alias=bucket_alias,
            assortment=assortment,
            object_key=object_key,
            size_name=size_name,
            extension=extension,
            resolved_bucket=resolved_bucket,
            resolved_dimension=dimension,
        )
