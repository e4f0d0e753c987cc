"""
minio-node: lifecycle supervisor for a single MinIO cluster member.

Translates container configuration into a MinIO process topology, starts and
stops the server, provisions default buckets and rotates root credentials.
"""
