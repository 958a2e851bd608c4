"""
==============================================
Request Sources
==============================================

Load a ModelingRequest from wherever the intake form left it:
a JSON file on disk, or an http(s) endpoint that serves the JSON.

Accepted JSON shapes:
    {"entities": [ {...}, {...} ]}     full ModelingRequest
    [ {...}, {...} ]                   bare list of entities
    {"entityName": "orders", ...}      single entity

USAGE:
    from cqlmodeler.sources import load_request

    request = load_request("requests/orders.json")
    request = load_request("http://127.0.0.1:8000/modeling-request")
"""

import json
from pathlib import Path
from typing import Any, Union

import requests

from cqlmodeler.errors import ValidationError
from cqlmodeler.model.request import ModelingRequest


def is_url(source: str) -> bool:
    return source.strip().lower().startswith(("http://", "https://"))


def fetch_json(url: str, timeout: float = 10) -> Any:
    """
    GET a JSON document.

    Raises:
        requests.RequestException: Network or HTTP status failure
        ValidationError: Body is not JSON
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        print(f"✗ Could not fetch request from {url}: {e}")
        raise
    try:
        return response.json()
    except ValueError as e:
        raise ValidationError(f"Response from {url} is not valid JSON: {e}") from e


def read_json(path: Union[str, Path]) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"{path} is not valid JSON: {e}") from e


def to_request(data: Any) -> ModelingRequest:
    """Coerce any of the accepted JSON shapes into a ModelingRequest."""
    if isinstance(data, list):
        return ModelingRequest.from_dict({"entities": data})
    if isinstance(data, dict):
        if "entities" in data:
            return ModelingRequest.from_dict(data)
        if "entityName" in data:
            return ModelingRequest.from_dict({"entities": [data]})
    raise ValidationError("Request must be an object with 'entities', a list of entities, or a single entity.")


def load_request(source: Union[str, Path], timeout: float = 10) -> ModelingRequest:
    """
    Load a modeling request from a file path or URL.

    Args:
        source: Path to a JSON file, or an http(s) URL
        timeout: HTTP timeout in seconds

    Returns:
        ModelingRequest ready for CassandraModeler.generate_models()
    """
    if isinstance(source, str) and is_url(source):
        data = fetch_json(source, timeout=timeout)
    else:
        data = read_json(source)
    return to_request(data)
