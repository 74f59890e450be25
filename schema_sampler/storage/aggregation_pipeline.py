# ==============================================
# Server-side Schema Pipeline
# ==============================================
#
# PURPOSE:
#   Express the whole sampling-and-aggregation algorithm as one
#   MongoDB aggregation pipeline, for collections where shipping the
#   sample to the client is too slow.
#
# STAGES:
# -------
#   1. $match (optional) + $sample        → the sample
#   2. $project $objectToArray / $type    → per-document (k, v=type) shape
#   3. $group $addToSet keys + shapes     → key sets and distinct shapes
#   4. $reduce $setUnion                  → global key set
#   5. $unwind + $setDifference fill      → complete each shape with "missing"
#   6. $group $arrayToObject              → distinct completed shapes
#   7. $unwind, $objectToArray, $unwind   → one (k, v) pair per document
#   8. $group by k, $addToSet v           → types per field
#   9. $group into one record (optional)  → {"schema": [{field, types}]}
#
#   group_results=False stops after stage 8 and streams one
#   {"_id": field, "types": [...]} record per field. Both layouts
#   merge to the same SchemaAggregate.
#
#   Distinct shapes are rebuilt as objects in stage 6 because
#   $addToSet compares objects faster than arrays of pairs.
#
# FUNCTION:
# ---------
# - build_schema_pipeline(sample_size, query=None, group_results=True) -> list[dict]
#
# ==============================================

from typing import Any, Dict, List, Optional

from bson.int64 import Int64


def build_schema_pipeline(
    sample_size: int,
    query: Optional[Dict[str, Any]] = None,
    group_results: bool = True
) -> List[Dict[str, Any]]:
    """
    Build the aggregation pipeline that infers the schema server-side.

    Args:
        sample_size: Number of documents for $sample
        query: Optional filter applied before sampling
        group_results: Collapse per-field results into one record

    Returns:
        The pipeline as a list of stage documents
    """
    pipeline: List[Dict[str, Any]] = []

    if query:
        pipeline.append({"$match": query})

    pipeline += [
        {"$sample": {"size": Int64(sample_size)}},
        {
            "$project": {
                "_id": 0,
                "schema": {
                    "$map": {
                        "input": {"$objectToArray": "$$ROOT"},
                        "as": "field",
                        "in": {"k": "$$field.k", "v": {"$type": "$$field.v"}},
                    }
                },
            }
        },
        # Key sets and shapes of the whole sample
        {
            "$group": {
                "_id": None,
                "keys": {"$addToSet": "$schema.k"},
                "schema": {"$addToSet": "$schema"},
            }
        },
        {
            "$project": {
                "_id": 0,
                "keys": {
                    "$reduce": {
                        "input": "$keys",
                        "initialValue": [],
                        "in": {"$setUnion": ["$$value", "$$this"]},
                    }
                },
                "schema": 1,
            }
        },
        {"$unwind": "$schema"},
        # Fill absent keys with "missing"
        {
            "$project": {
                "schema": {
                    "$reduce": {
                        "input": {"$setDifference": ["$keys", "$schema.k"]},
                        "initialValue": "$schema",
                        "in": {
                            "$concatArrays": ["$$value", [{"k": "$$this", "v": "missing"}]]
                        },
                    }
                }
            }
        },
        # Distinct completed shapes
        {
            "$group": {
                "_id": None,
                "schema": {"$addToSet": {"$arrayToObject": "$schema"}},
            }
        },
        {"$unwind": "$schema"},
        {"$project": {"_id": 0, "schema": {"$objectToArray": "$schema"}}},
        {"$unwind": "$schema"},
        {"$group": {"_id": "$schema.k", "types": {"$addToSet": "$schema.v"}}},
    ]

    if group_results:
        pipeline.append({
            "$group": {
                "_id": None,
                "schema": {"$addToSet": {"field": "$_id", "types": "$types"}},
            }
        })

    return pipeline
