from skelgen.cli import main

raise SystemExit(main())
