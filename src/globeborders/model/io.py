"""
Dataset Input (GeoJSON)
Reads a country FeatureCollection from disk and parses it into Features.
"""
from __future__ import annotations

import json
import logging
import os
from importlib.metadata import version, PackageNotFoundError
from typing import Any, List, Mapping

from globeborders.model.errors import DatasetUnavailableError
from globeborders.model.features import Feature

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("globeborders")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


def read_feature_collection(filepath: str) -> dict:
    """
    Loads a GeoJSON FeatureCollection from a file.

    Raises:
        DatasetUnavailableError: If the file is missing, is not valid JSON, or
            does not contain a 'features' list.
    """
    logger.info(f"Loading dataset from: {filepath}")
    if not os.path.exists(filepath):
        msg = f"Dataset file '{filepath}' does not exist."
        logger.error(msg)
        raise DatasetUnavailableError(msg)

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        msg = f"Failed to read dataset '{filepath}': {e}"
        logger.error(msg)
        raise DatasetUnavailableError(msg) from e

    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        msg = f"Dataset '{filepath}' is not a FeatureCollection."
        logger.error(msg)
        raise DatasetUnavailableError(msg)

    return data


def parse_features(collection: Mapping[str, Any]) -> List[Feature]:
    """
    Converts a deserialized FeatureCollection into Features.

    Features with unsupported geometry are skipped.
    """
    features: List[Feature] = []
    for raw in collection.get("features") or []:
        feature = Feature.from_geojson(raw)
        if feature is not None:
            features.append(feature)

    logger.debug(f"Parsed {len(features)} features.")
    return features


def load_features(filepath: str) -> List[Feature]:
    """Reads and parses a dataset file in one step."""
    return parse_features(read_feature_collection(filepath))
