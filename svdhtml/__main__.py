from svdhtml.cli import main

raise SystemExit(main())
