"""
Client library and scripts for managing a Sonatype Nexus 3 repository server.

Use `nexuslib.plumbing.client.connect` to get a `Nexus` client, then pass it to the functions in
`nexuslib.plumbing` and `nexuslib.tasks`.
"""
