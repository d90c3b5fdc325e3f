# MIT License
# Copyright (c) 2025 Hashborn

"""
Fixed schemas of the legacy chain state entries read during migration.
"""

UNREGISTERED_ADDRESSES_SCHEMA = {
    "$id": "/legacyAccount/unregisteredAddresses",
    "type": "object",
    "required": ["unregisteredAddresses"],
    "properties": {
        "unregisteredAddresses": {
            "type": "array",
            "fieldNumber": 1,
            "items": {
                "type": "object",
                "required": ["address", "balance"],
                "properties": {
                    "address": {"dataType": "bytes", "fieldNumber": 1},
                    "balance": {"dataType": "uint64", "fieldNumber": 2},
                },
            },
        },
    },
}

VOTE_WEIGHTS_SCHEMA = {
    "$id": "/dpos/voteWeights",
    "type": "object",
    "required": ["voteWeights"],
    "properties": {
        "voteWeights": {
            "type": "array",
            "fieldNumber": 1,
            "items": {
                "type": "object",
                "required": ["round", "delegates"],
                "properties": {
                    "round": {"dataType": "uint32", "fieldNumber": 1},
                    "delegates": {
                        "type": "array",
                        "fieldNumber": 2,
                        "items": {
                            "type": "object",
                            "required": ["address", "voteWeight"],
                            "properties": {
                                "address": {"dataType": "bytes", "fieldNumber": 1},
                                "voteWeight": {"dataType": "uint64", "fieldNumber": 2},
                            },
                        },
                    },
                },
            },
        },
    },
}
