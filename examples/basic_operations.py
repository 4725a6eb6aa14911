# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from blobfs import BlobFS, EndOfStream, InvalidPathError, NotFoundError, V1, open_bucket

def main():
    # Open an in-memory bucket and lay out a small site under v1/site/
    bucket = open_bucket("mem://")
    for key, data in {
        "v1/site/index.html": b"<html><body>Hello</body></html>",
        "v1/site/css/main.css": b"body { color: black; }",
        "v1/site/css/print.css": b"@media print {}",
        "v1/site/js/app.js": b"console.log('hi');",
        "v1/other/secret.txt": b"not visible",
    }.items():
        bucket.write_all(key, data)

    with BlobFS(bucket, version=V1, prefix="site", page_size=2) as fs:
        # Read a file
        with fs.open("index.html") as f:
            print(f"index.html ({f.size()} bytes): {f.read().decode()}")

        # Partial reads and seeks
        with fs.open("css/main.css") as f:
            f.seek(7)
            print(f"css/main.css from offset 7: {f.read(5).decode()}")

        # List the root
        print("Root entries:")
        for entry in fs.read_dir("."):
            kind = "dir " if entry.is_dir() else "file"
            print(f"- {kind} {entry.name}")

        # Read a directory a page at a time
        css = fs.open("css")
        while True:
            try:
                page = css.readdir(1)
            except EndOfStream as e:
                print(f"Last page: {[entry.name for entry in e.partial]}")
                break
            print(f"Page: {[entry.name for entry in page]}")

        # Walk the tree
        for dirpath, dirnames, filenames in fs.walk():
            print(f"{dirpath}: dirs={dirnames} files={filenames}")

        # Keys outside the prefix are not visible
        try:
            fs.open("../other/secret.txt")
        except InvalidPathError as e:
            print(f"Rejected: {e}")
        try:
            fs.open("secret.txt")
        except NotFoundError as e:
            print(f"Not found: {e}")

if __name__ == "__main__":
    main()
