from repo_clip.cli import main

raise SystemExit(main())
