# wordcount/paths.py

# --- Final output (the surviving run is moved here) ---
OUTPUT_PATH = "output.tsv"

# --- Temp run naming (tempfile.mkstemp prefix/suffix) ---
RUN_PREFIX = "wordcount_"      # leaf runs written by the builder
MERGED_PREFIX = "merged_"      # runs produced by a k-way merge
RUN_SUFFIX = ".tmp"

# --- Stdin marker for the input path ---
STDIN_PATH = "-"

# --- Text encoding for input, runs and output ---
# surrogateescape keeps undecodable bytes as distinct tokens and writes them back unchanged
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"
