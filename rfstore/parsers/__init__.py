from rfstore.parsers.payloads import parse_collection, parse_record, parse_records

__all__ = ["parse_collection", "parse_record", "parse_records"]
