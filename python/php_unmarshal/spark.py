"""
PySpark UDF helpers for decoding PHP serialized columns.

Example:
    >>> from php_unmarshal.spark import php_unmarshal_udf
    >>> decode = php_unmarshal_udf()
    >>> df = df.withColumn("parsed", decode("serialized_col"))
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional, Union

from php_unmarshal._core import loads_json

if TYPE_CHECKING:
    from pyspark.sql import Column, SparkSession

logger = logging.getLogger(__name__)

# Lazy imports to avoid requiring PySpark at import time
_pyspark_available: Optional[bool] = None


def _check_pyspark() -> None:
    """Check if PySpark is available."""
    global _pyspark_available
    if _pyspark_available is None:
        try:
            import pyspark  # noqa: F401
            _pyspark_available = True
        except ImportError:
            _pyspark_available = False

    if not _pyspark_available:
        raise ImportError(
            "PySpark is required for spark module. "
            "Install with: pip install phpunmarshal[spark]"
        )


def deserialize_to_json(
    data: Optional[Union[bytes, bytearray, str]],
    auto_unescape: bool = True,
) -> Optional[str]:
    """Decode one cell to JSON text, or None if it is empty or undecodable.

    Spark rows can't carry exceptions, so decoding failures become nulls.
    """
    if data is None:
        return None
    # Spark hands string columns over as str
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return loads_json(bytes(data), auto_unescape=auto_unescape)
    except Exception as exc:
        logger.debug("could not decode value: %s", exc)
        return None


def php_unmarshal_udf(auto_unescape: bool = True) -> Callable[["Column"], "Column"]:
    """
    Create a PySpark UDF that decodes PHP serialized data to JSON strings.

    Args:
        auto_unescape: Automatically handle DB-escaped strings

    Returns:
        A UDF function that can be applied to DataFrame columns

    Example:
        >>> from php_unmarshal.spark import php_unmarshal_udf
        >>> from pyspark.sql import functions as F
        >>>
        >>> decode = php_unmarshal_udf()
        >>> df = df.withColumn("parsed", decode(F.col("php_data")))
        >>>
        >>> # Or with schema inference
        >>> from pyspark.sql.functions import from_json, schema_of_json
        >>> schema = schema_of_json('{"name":"Alice","age":30}')
        >>> df = df.withColumn("parsed", from_json(decode("php_data"), schema))
    """
    _check_pyspark()

    from pyspark.sql.functions import udf
    from pyspark.sql.types import StringType

    @udf(returnType=StringType())
    def _deserialize(data: Optional[bytes]) -> Optional[str]:
        return deserialize_to_json(data, auto_unescape=auto_unescape)

    return _deserialize


def php_unmarshal_pandas_udf(auto_unescape: bool = True) -> Callable:
    """
    Create a Pandas UDF for batch decoding.

    This is more efficient than the regular UDF for large datasets
    as it processes data in batches.

    Example:
        >>> from php_unmarshal.spark import php_unmarshal_pandas_udf
        >>> decode = php_unmarshal_pandas_udf()
        >>> df = df.withColumn("parsed", decode("php_data"))
    """
    _check_pyspark()

    from pyspark.sql.functions import pandas_udf
    from pyspark.sql.types import StringType

    import pandas as pd

    @pandas_udf(StringType())
    def _deserialize_batch(series: pd.Series) -> pd.Series:
        def safe_deserialize(data: Optional[Union[bytes, str, float]]) -> Optional[str]:
            if isinstance(data, float) and pd.isna(data):
                return None
            return deserialize_to_json(data, auto_unescape=auto_unescape)

        return series.apply(safe_deserialize)

    return _deserialize_batch


def register_udfs(spark: "SparkSession", prefix: str = "php_") -> None:
    """
    Register the decoding UDF with a Spark session for use from SQL.

    Example:
        >>> from pyspark.sql import SparkSession
        >>> from php_unmarshal.spark import register_udfs
        >>>
        >>> spark = SparkSession.builder.getOrCreate()
        >>> register_udfs(spark)
        >>> spark.sql("SELECT php_unserialize(data) FROM table")
    """
    _check_pyspark()

    from pyspark.sql.types import StringType

    spark.udf.register(f"{prefix}unserialize", deserialize_to_json, StringType())
