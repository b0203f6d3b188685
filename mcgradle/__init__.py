"""Main module for the mc-gradle-builder API.

The API is split in a few modules, from the leaf to the root: `metadata` parses the
version descriptor and the assets index into typed objects, `host` resolves the
running platform and the game's directory, `plan` derives the file operations to
materialize, `gradle` generates the build script and `builder` chains everything.
"""

BUILDER_NAME = "mc-gradle-builder"
BUILDER_VERSION = "0.1.0"
BUILDER_AUTHORS = ["Github contributors"]
