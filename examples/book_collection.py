#!/usr/bin/env python3
"""
vdbx Book Collection Example

Creates a collection of books with an embedding per book, inserts a few
rows, then runs a vector search and a scalar query against it.

Embeddings are random here; plug in a real embedding model to get
meaningful search results.

Usage:
    VDB_HOST=localhost python examples/book_collection.py
"""

import os
import sys

import numpy as np

from vdbx import (
    CollectionSchema,
    FieldData,
    FieldSchema,
    FieldType,
    VDBClient,
)
from vdbx.logging import configure_logging

COLLECTION_NAME = "book_collection"
DIMENSION = 1536

BOOKS = [
    "Why do programmers hate nature? It has too many bugs.",
    "Why was the computer cold? It left its Windows open.",
    "Why did the developer go broke? Because he used up all his cache.",
]


def main():
    if "VDB_HOST" not in os.environ:
        print("VDB_HOST is not set", file=sys.stderr)
        return 1

    configure_logging("INFO")

    schema = CollectionSchema(
        COLLECTION_NAME,
        [
            FieldSchema(
                "book_id",
                FieldType.int64(primary_key=True, auto_id=True),
                "This is `book_id` field",
            ),
            FieldSchema("book_name", FieldType.varchar(200), "This is `book_name` field"),
            FieldSchema("book_intro", FieldType.float_vector(DIMENSION)),
        ],
        "A guide example for vdbx",
    )

    rng = np.random.default_rng(42)
    embeddings = rng.random((len(BOOKS), DIMENSION), dtype=np.float32)

    with VDBClient.from_env() as client:
        print("[step-1] create collection ... ", end="", flush=True)
        if client.has_collection(COLLECTION_NAME):
            client.drop_collection(COLLECTION_NAME)
        client.create_collection(COLLECTION_NAME, schema)
        print("Done")

        print("[step-2] fill in the collection ... ", end="", flush=True)
        result = client.insert(
            COLLECTION_NAME,
            [
                FieldData.from_schema(schema.get_field("book_name"), BOOKS),
                FieldData.from_schema(schema.get_field("book_intro"), embeddings),
            ],
        )
        client.flush([COLLECTION_NAME])
        print(f"Done ({result.insert_cnt} rows)")

        print("[step-3] build index and load ... ", end="", flush=True)
        client.create_index(
            COLLECTION_NAME,
            "book_intro",
            {"index_type": "IVF_FLAT", "metric_type": "L2", "params": {"nlist": 16}},
        )
        client.load_collection(COLLECTION_NAME)
        print("Done")

        print("[step-4] perform a vector search ... ", end="", flush=True)
        query = embeddings[1:2] + rng.normal(0, 0.01, (1, DIMENSION)).astype(np.float32)
        search = client.search(
            COLLECTION_NAME,
            query,
            "book_intro",
            params={"nprobe": 8},
            limit=2,
        )
        print("Done")
        if search.results is not None:
            for hit in search.results.hits(0):
                print(f"  id={hit.id} score={hit.score:.4f}")

        print("[step-5] query book names ... ", end="", flush=True)
        rows = client.query(COLLECTION_NAME, "book_id >= 0", output_fields=["book_name"])
        print("Done")
        names = rows.get_field("book_name")
        for name in names.to_list() if names is not None else []:
            print(f"  {name}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
