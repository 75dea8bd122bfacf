from crazyeights.cli import main

raise SystemExit(main())
