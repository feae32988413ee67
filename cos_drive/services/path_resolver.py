from cos_drive.exceptions import CycleDetected


class PathResolver:
    """Rebuilds a record's path by walking its parent chain.

    The walk is iterative and bounded by max_depth; a revisited record or a
    chain longer than the bound raises CycleDetected.
    """

    DEFAULT_MAX_DEPTH = 64

    def __init__(self, metadata, max_depth=DEFAULT_MAX_DEPTH):
        self.metadata = metadata
        self.max_depth = max_depth

    def resolve_path_chain(self, record_id):
        """Return the records from the root down to record_id (inclusive)."""
        record = self.metadata.find_by_id(record_id)
        chain = [record]
        visited = {record.id}

        while record.parent_id is not None:
            if record.parent_id in visited:
                raise CycleDetected(f"Parent chain of record {record_id} loops back to record {record.parent_id}")
            if len(chain) >= self.max_depth:
                raise CycleDetected(f"Parent chain of record {record_id} is deeper than {self.max_depth}")
            record = self.metadata.find_by_id(record.parent_id)
            visited.add(record.id)
            chain.append(record)

        chain.reverse()
        return chain

    def resolve_path_string(self, record_id):
        chain = self.resolve_path_chain(record_id)
        root, rest = chain[0], chain[1:]
        segments = [_root_segment(root)]
        segments.extend(_leaf_segment(record) for record in rest)
        return '/'.join(segments)


def _root_segment(record):
    # Roots may sit under an explicit prefix, so their whole key is the base
    return record.key.rstrip('/') if record.key else record.name

def _leaf_segment(record):
    if not record.key:
        return record.name
    return record.key.rstrip('/').rsplit('/', 1)[-1]
